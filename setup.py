"""
Setup script for sketchsim package
"""

# Always prefer setuptools over distutils
from setuptools import setup, find_packages
# To use a consistent encoding
from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))

# Get the long description from the relevant file
with open(path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()

# Get the code version
version = {}
with open(path.join(here, "sketchsim/version.py")) as fp:
    exec(fp.read(), version)
__version__ = version['__version__']
# now we have a `__version__` variable

setup(
    name='sketchsim',
    version=__version__,
    description='Bottom-k and k-partition sketches for estimating Jaccard similarity of large sets',
    long_description=long_description,
    license='MIT',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Information Analysis',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    keywords='sketch jaccard minhash bottom-k',
    packages=find_packages(include=['sketchsim*']),
    python_requires='>=3.10',
    install_requires=[
        'numpy>=1.17',
        'scipy>=1.0.0',
        'typer>=0.9',
        'tqdm>=4.0',
    ],
    extras_require={
        'benchmark': [
            'matplotlib>=3.1.2',
        ],
        'test': [
            'pytest',
            'coverage',
            'matplotlib>=3.1.2',
        ],
    },
    entry_points={
        'console_scripts': [
            'sketchsim=sketchsim.cli:app',
        ],
    },
)
