from setuptools import setup, find_packages
import os

install_requires = ["lark", "pydantic>=2"]

# Define optional dependencies for development
extras_require = {"dev": ["pytest"]}

setup(
    name="baiko",
    version="0.1.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "baiko = baiko.cli:main",
        ],
    },
    include_package_data=True,
    package_data={"baiko.lexer": ["*.lark"]},
    description="Lexer, parser, interpreter and JavaScript generator for the Baiko language.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
