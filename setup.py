from setuptools import setup, find_packages
import re

# Read version from vestcalc/__init__.py
with open('vestcalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='vestcalc',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=12.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'vest-calc=vestcalc.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Vesting equity grant tax exposure projections.',
    python_requires='>=3.10',
)
