"""Super Calc - calculator, unit converter and tip splitter."""
from setuptools import setup, find_packages

setup(
    name="super-calc",
    version="1.0.0",
    description="Calculator with unit conversion, tip splitting and persisted history",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click>=8.1.0",
        "rich>=13.0.0",
        "questionary>=2.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "super-calc=super_calc.cli:main",
            "scalc=super_calc.cli:main",  # Short alias
        ],
    },
    python_requires=">=3.10",
)
