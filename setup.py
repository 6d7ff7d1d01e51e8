# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="dircomp",
    version="1.0.0",
    description="Torrent directory comparison and cleanup tool",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["dircomp", "dircomp.*"]),
    package_data={
        "dircomp.interface.locales": ["*.json"],
    },
    python_requires=">=3.9",
    install_requires=[
        "psutil",  # Lock release (unlock mode)
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'dircomp=dircomp.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
