from setuptools import setup, find_packages

_dct = {}
with open('pyexachem/version.py') as f:
  exec(f.read(), _dct)
__version__ = _dct['__version__']

setup(
    name='pyexachem',
    version=__version__,
    description='Cholesky-based SCF, MP2, CCSD and FCIDUMP drivers on a jax/numpy backend',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    author='The PyExaChem Authors',
    include_package_data=True,
    packages=find_packages(exclude=["examples","*test*"]),
    python_requires='>=3.11',
    install_requires=[
        'numpy>=1.17',
        'scipy',
        'h5py',
        'jax>=0.4.30',
        'pyscf>=2.3',
        'pydantic>=2',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
        'cuda12': [
            'jax[cuda12]>=0.4.30',
        ],
    },
    entry_points={
        'console_scripts': [
            'pyexachem=pyexachem.exachem:main',
        ],
    },
    license='Apache-2.0',
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Topic :: Scientific/Engineering",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    zip_safe=False,
)
