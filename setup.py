from setuptools import setup, find_packages

with open('README.md', "r") as fid:   #encoding='utf-8'
    long_description = fid.read()

setup(
    name='bestwplane',
    version='0.1.0',
    description='Best w-plane correction of non-coplanar interferometer geometry',
    long_description=long_description,
    long_description_content_type="text/markdown",
    license='Apache-2.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=['dask>=2.13.0',
                      'numba>=0.51.0',
                      'numpy>=1.18.1',
                      'scipy>=1.4.1',
                      'xarray>=0.16.1'],
    extras_require={
        'dev': [
            'pytest>=5.3.5',
            'black>=19.10.b0',
            'flake8>=3.7.9',
            'isort>=4.3.21',
            'pylint>=2.4.4',
        ]
    }

)
