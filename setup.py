"""
Project setup script
"""

from pathlib import Path

from setuptools import find_packages, setup

BASE_DIR = Path(__file__).resolve().parent


def read_requirements():
    """Runtime dependencies, one per line in requirements.txt"""
    lines = (BASE_DIR / 'requirements.txt').read_text(encoding='utf-8').splitlines()
    return [line.strip() for line in lines if line.strip() and not line.startswith('#')]


setup(
    name='booktalk',
    version='0.1.0',
    description='REST backend for a book-discussion community',
    python_requires='>=3.9',
    packages=find_packages(include=['booktalk', 'booktalk.*']),
    install_requires=read_requirements(),
    extras_require={
        'test': ['pytest>=7.4'],
    },
    entry_points={
        'console_scripts': [
            'booktalk=booktalk.main:main',
        ],
    },
)
