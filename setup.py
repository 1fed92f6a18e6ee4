# -*- coding: utf-8 -*-

import setuptools

install_requires = [
  "Flask>=2.2",
  "Flask-SQLAlchemy>=3.0",
  "SQLAlchemy>=2.0",
  "blinker>=1.6",
  "click>=8.0",
  "pytz",
  "PyYAML",
]

tests_require = [
  "pytest",
  "pytest-xdist",
]

dev_requires = tests_require + [
  # For coverage
  "coverage",
  "pytest-cov",
  # Test runner
  "nox",
]


def get_long_description():
  return open("README.rst").read()


setuptools.setup(
  # Metadata
  name='billtag-core',
  version='0.1.0.dev0',
  license='LGPL',
  description='Descriptive and control tags for subscription billing, based on Flask and SQLAlchemy',
  long_description=get_long_description(),
  long_description_content_type='text/x-rst',
  platforms='any',
  classifiers=[
    'Development Status :: 3 - Alpha',
    'Intended Audience :: Developers',
    'License :: OSI Approved :: GNU Lesser General Public License v2 (LGPLv2)',
    'Operating System :: OS Independent',
    'Programming Language :: Python',
    'Programming Language :: Python :: 3',
    'Framework :: Flask',
  ],

  # Data
  packages=setuptools.find_packages(include=['billtag', 'billtag.*']),
  package_data={'billtag.core': ['default_logging.yml']},
  include_package_data=True,
  zip_safe=False,
  python_requires='>=3.9',

  # Requirements & dependencies
  install_requires=install_requires,
  extras_require={
    'tests': tests_require,
    'dev': dev_requires,
  },
)
