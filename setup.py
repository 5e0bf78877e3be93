import pathlib
from setuptools import setup, find_packages


# The directory containing this file
HERE = pathlib.Path(__file__).parent

# The text of the README file
README_PATH = HERE / "README.md"
README = README_PATH.read_text() if README_PATH.exists() else ""

setup(
    name="visual-query",
    version="0.1.0",
    description="Typed node definitions and backend-synchronized controls for visual query graphs",
    long_description=README,
    long_description_content_type="text/markdown",
    license="MIT License",
    classifiers=[],
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    entry_points={
        "console_scripts": [
            "visual-query = visual_query.cli:main",
        ],
    },
    install_requires=[
        "click",
        "pyyaml",
        "colorama>=0.4.6",
        "termcolor",
    ],
    extras_require={
        "dev": [
            "pytest",
        ],
    },
    package_data={},
    include_package_data=True,
    python_requires=">=3.9",
)
