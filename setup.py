from setuptools import setup, find_packages

setup(
    name="traction-notation",
    version="0.1.0",
    description="Traction Algebra notation parser with canonical and markup printers",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="Traction Project",
    python_requires=">=3.9",
    packages=find_packages(),
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "traction=traction.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Text Processing :: Markup",
    ],
)
