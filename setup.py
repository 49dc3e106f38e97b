# -*- coding: utf-8 -*-
from setuptools import setup, find_packages


DISTNAME = "scikit-multilocus"

PACKAGE_NAME = "multilocus"

DESCRIPTION = "A Python package for analysing linkage, clonality and " \
    "differentiation in multilocus genotype data."

MAINTAINER = "scikit-multilocus developers"

LICENSE = "MIT"

INSTALL_REQUIRES = ["numpy", "scipy"]

EXTRAS_REQUIRE = {
    "test": [
        "pytest",
    ]
}

CLASSIFIERS = [
    "Development Status :: 4 - Beta",
    "License :: OSI Approved :: MIT License",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Scientific/Engineering",
    "Operating System :: Microsoft :: Windows",
    "Operating System :: POSIX",
    "Operating System :: Unix",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.9",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
]


def get_version():
    ns = dict()
    with open("multilocus/version.py") as f:
        exec(f.read(), ns)
    return ns["version"]


def setup_package():
    metadata = dict(
        name=DISTNAME,
        version=get_version(),
        maintainer=MAINTAINER,
        description=DESCRIPTION,
        license=LICENSE,
        package_dir={"": "."},
        packages=find_packages(include=[PACKAGE_NAME, PACKAGE_NAME + ".*"]),
        package_data={"multilocus.test": ["data/*"]},
        classifiers=CLASSIFIERS,
        install_requires=INSTALL_REQUIRES,
        extras_require=EXTRAS_REQUIRE,
        python_requires=">=3.9",
        zip_safe=False,
    )
    setup(**metadata)


if __name__ == "__main__":
    setup_package()
