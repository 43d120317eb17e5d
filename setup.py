from setuptools import setup, find_packages

setup(
    name="terragine",
    version="0.1.0",
    packages=find_packages(include=["terragine", "terragine.*"]),
    install_requires=[
        "numpy>=1.21.0",
        "shapely>=2.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    author="Adam Koltuniuk",
    author_email="adam@koltuni.uk",
    description=(
        "Elevation-aware movement paths across maps with plateaus, ramps and "
        "stairs, traced over a cutaway profile of each move."
    ),
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    python_requires=">=3.10",
)
