#!/usr/bin/python3
# -*- coding: utf-8 -*-

from setuptools import setup, find_packages
import os

ROOT = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(ROOT, 'README.md'), 'r', encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='pyeostoolbox',
    include_package_data=True,
    version='0.1.0',  # Ideally should be same as your GitHub release tag version
    packages=find_packages(),
    description='pyEoSToolbox - Equation of State Equilibrium Solvers',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Mark W. Burgoyne',
    author_email='mark.w.burgoyne@gmail.com',
    keywords=['eos', 'thermodynamics', 'saturation', 'critical point', 'pc-saft', 'peng-robinson'],
    classifiers=[],
    python_requires='>=3.9',
    install_requires=[
        'numpy',
        'scipy',
        'pandas',
        'tabulate',
        'jax'
    ],
    extras_require={
        'test': ['pytest']
    }
)
