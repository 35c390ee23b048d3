from setuptools import setup, find_packages

# defines __version__
exec(open("reqwire/_version.py").read())

setup(
    name="reqwire",
    version=__version__,
    description=
        "Bring-your-own-I/O request body encoding and Server-Sent Events parsing",
    long_description=open("README.rst").read(),
    license="MIT",
    packages=find_packages(exclude=["reqwire.tests"]),
    python_requires=">=3.8",
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: Implementation :: CPython",
        "Programming Language :: Python :: Implementation :: PyPy",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP",
    ],
)
