"""
Setup script for NML.

Usage:
    pip install -e .           # Editable install
    pip install -e ".[dev]"    # With dev dependencies

Run the tests from the project root:
    pytest tests/unit
"""

from setuptools import setup, find_packages


setup(
    name='nml',
    version='0.1.0',
    description='Single precision vector, matrix and quaternion math for 3D graphics',
    package_dir={'': 'src'},
    packages=find_packages('src'),
    python_requires='>=3.8',
    install_requires=[
        'numpy',
    ],
    extras_require={
        'dev': [
            'pytest',
        ],
    },
)
