from setuptools import setup
from setuptools import find_packages


setup(
    name='peerlink',
    python_requires='>=3.9',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
    ],
    extras_require={
        'test': [
            'pytest',
            'hypothesis',
        ],
    },
    entry_points = {
        'console_scripts': [
            'peerlink = peerlink.peerlink:main',
        ],
    }
)
