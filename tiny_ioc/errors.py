from __future__ import annotations

from typing import Any


class TinyIocError(Exception):
    """Base class for every error raised by tiny_ioc."""


class InvalidKeyError(TinyIocError):
    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"invalid key={key!r}")


class InvalidConstructorError(TinyIocError):
    def __init__(self, target: Any, message: str | None = None):
        self.target = target
        super().__init__(message or f"invalid constructor target={target!r}")


class InvalidParameterError(TinyIocError):
    def __init__(
        self,
        message: str = "invalid parameter",
        *,
        class_name: str | None = None,
        parameter_name: str | None = None,
        parameter_index: int | None = None,
    ):
        self.class_name = class_name
        self.parameter_name = parameter_name
        self.parameter_index = parameter_index
        super().__init__(message)


class ResolveError(TinyIocError):
    def __init__(
        self,
        message: str = "resolve failed",
        *,
        key: Any = None,
        tag: str | None = None,
        cls: type | None = None,
        parameter_name: str | None = None,
        parameter_index: int | None = None,
        parameter_key: Any = None,
    ):
        self.message = message
        self.key = key
        self.tag = tag
        self.cls = cls
        self.parameter_name = parameter_name
        self.parameter_index = parameter_index
        self.parameter_key = parameter_key
        super().__init__(message)

    @property
    def causes(self) -> list[BaseException]:
        chain: list[BaseException] = []
        cause = self.__cause__
        while cause is not None:
            chain.append(cause)
            cause = cause.__cause__
        return chain

    @property
    def root_cause(self) -> BaseException:
        causes = self.causes
        return causes[-1] if causes else self

    @staticmethod
    def print_error(error: BaseException):
        lines = [f"error: {type(error).__name__}"]
        if isinstance(error, ResolveError):
            if error.cls is not None:
                lines.append(f"class: {error.cls.__name__}")
            if error.parameter_name is not None:
                lines.append(f"parameter: {error.parameter_name} (index={error.parameter_index})")
            lines.append(f"key: {error.key!r}")
            if error.tag is not None:
                lines.append(f"tag: {error.tag}")
        else:
            lines.append(f"message: {error}")

        width = max(len(line) for line in lines)
        top_border = "┌" + "─" * (width + 2) + "┐"
        bottom_border = "└" + "─" * (width + 2) + "┘"
        padded_content = "\n".join("│ " + line.ljust(width) + " │" for line in lines)
        return f"{top_border}\n{padded_content}\n{bottom_border}"

    @property
    def dependency_chain(self):
        chain = ""
        arrow = "↓\n↓\n↓\n"

        for index, item in enumerate([self, *self.causes]):
            printed_item = ResolveError.print_error(item)
            if index == 0:
                chain += f"{printed_item}\n"
            else:
                chain += f"{arrow}{printed_item}\n"

        return chain

    def __str__(self):
        if self.__cause__ is None:
            return self.message
        return f"\n{self.message}\n\nDependency chain:\n{self.dependency_chain}"


class NotFoundError(ResolveError):
    pass


class MissingParameterMetadataError(ResolveError):
    pass


class NeedsScopedRegistrationError(TinyIocError):
    def __init__(self, key: Any, tag: str | None = None):
        self.key = key
        self.tag = tag
        super().__init__(key, tag)

    def __str__(self):
        with_tag = f" with tag {self.tag}" if self.tag else ""
        return f"{self.key}{with_tag} is expected to be registered within a scope"
