from setuptools import setup, find_packages


setup(
    name="woolcode",
    version="0.1",
    packages=find_packages(include=["woolcode", "woolcode.*"]),
    description="Encode text and files as Minecraft wool block structures, with integrity checks.",
    author="vercingetorx",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "woolcode=woolcode.cli:main",
        ]
    },
)
