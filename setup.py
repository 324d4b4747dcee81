import pathlib
import re
import sys

from setuptools import setup

if sys.version_info < (3, 8):
    raise RuntimeError("cookiecodec requires Python 3.8+")


HERE = pathlib.Path(__file__).parent

txt = (HERE / "cookiecodec" / "__init__.py").read_text("utf-8")
try:
    version = re.findall(r'^__version__ = "([^"]+)"\r?$', txt, re.M)[0]
except IndexError:
    raise RuntimeError("Unable to determine version.")

install_requires = [
    "attrs>=21.3.0",
    "multidict>=4.5,<7.0",
]

tests_require = [
    "pytest>=7.0",
]


setup(
    name="cookiecodec",
    version=version,
    description="HTTP Cookie/Set-Cookie header decoder and Cookie header encoder",
    classifiers=[
        "License :: OSI Approved :: Apache Software License",
        "Intended Audience :: Developers",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Development Status :: 4 - Beta",
        "Topic :: Internet :: WWW/HTTP",
    ],
    license="Apache 2",
    packages=["cookiecodec"],
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require={"test": tests_require},
    include_package_data=True,
)
