""" detsig build script for setuptools.

"""

from setuptools import find_packages, setup  # type: ignore

import detsig

with open("README.md", "r", encoding="ascii") as file_:
    longdescription = file_.read()

setup(
    name=detsig.name,
    version=detsig.__version__,
    license=detsig.__license__,
    author=detsig.__author__,
    author_email=detsig.__author_email__,
    description="Deterministic DSA/ECDSA nonces (RFC 6979) and signatures",
    long_description=longdescription,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=["ecdsa>=0.18", "dataclasses-json>=0.5.7"],
    extras_require={"tests": ["pytest"]},
    keywords="cryptography elliptic-curves ecdsa dsa RFC-6979 deterministic-nonce",
    python_requires=">=3.8",
    classifiers=[
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
