from pathlib import Path

from setuptools import setup

this_directory = Path(__file__).parent
long_description = (this_directory / "README.rst").read_text()

setup(
    name="tiny_ioc",
    version="0.4.0",
    license="MIT",
    description="A tiny dependency injection container with nested scopes for Python 3.10 +",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    packages=["tiny_ioc", "tiny_ioc.ext", "tiny_ioc.ext.fastapi"],
    python_requires=">=3.10",
    install_requires=["theutilitybelt"],
    extras_require={
        "fastapi": ["fastapi"],
        "test": ["pytest", "assertive<1.0", "fastapi", "httpx"],
    },
    include_package_data=True,
    platforms="any",
    classifiers=[
        "Programming Language :: Python",
        "Development Status :: 4 - Beta",
        "Natural Language :: English",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Software Development :: Libraries :: Application Frameworks",
    ],
)
