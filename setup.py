from setuptools import setup, find_packages

setup(
    name="quill-cli",
    version="0.1.0",
    description="Command line interpretation engine with typed, completable commands.",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="Roland Thomas Jr",
    author_email="roland@rtj.dev",
    packages=find_packages(include=["quill", "quill.*"]),
    python_requires=">=3.10",
    install_requires=[
        "rich",
        "pydantic>=2",
        "prompt_toolkit",
        "pyyaml",
        "toml",
        "python-json-logger>=3",
    ],
    extras_require={
        "test": ["pytest", "pytest-asyncio"],
    },
    entry_points={
        "console_scripts": ["quill=quill.__main__:main"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Development Status :: 3 - Alpha",
    ],
)
