# -*- coding: utf-8 -*-
import codecs
from setuptools import setup, find_packages


tests_require = [
    'Flask>=1.0',
    'pytest>=6.0',
]

setup(
    name='Potion-Hypermedia',
    version='0.1.0',
    packages=find_packages(exclude=['*tests*']),
    url='http://potion.readthedocs.org/en/latest/',
    license='MIT',
    author='Lars Schöning',
    author_email='lars@lyschoening.de',
    description='Asynchronous hypermedia client for HAL, Siren, Collection+JSON and JSON APIs',
    long_description=codecs.open('README.rst', encoding='utf-8').read(),
    tests_require=tests_require,
    python_requires='>=3.8',
    install_requires=[
        'Werkzeug>=1.0',
        'blinker>=1.3',
        'requests>=2.20',
        'rfc3987',
        'uritemplate>=3.0'
    ],
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Framework :: AsyncIO',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Software Development :: Libraries :: Python Modules'
    ],
    zip_safe=False,
    extras_require={
        'docs': ['sphinx'],
        'tests': tests_require,
    }
)
