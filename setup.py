#!/usr/bin/env python

import os

from setuptools import find_packages, setup


def read(filename):
    path = os.path.join(os.path.dirname(__file__), filename)
    with open(path, encoding="utf-8") as handle:
        return handle.read()


version = __import__("page_attachments").__version__
devstatus = "Development Status :: 5 - Production/Stable"
if ".dev" in version:
    devstatus = "Development Status :: 3 - Alpha"
elif ".pre" in version:
    devstatus = "Development Status :: 4 - Beta"

setup(
    name="django-page-attachments",
    version=version,
    description="Template tags for rendering the file attachments of CMS pages.",
    long_description=read("README.rst"),
    license="BSD License",
    platforms=["OS Independent"],
    packages=find_packages(exclude=["tests", "tests.*", "testapp", "testapp.*"]),
    python_requires=">=3.8",
    install_requires=[
        "Django>=3.2",
        "Pillow>=9.1.0",
    ],
    extras_require={
        "tests": [
            "django-mptt>=0.13",
            "pytest>=7.0",
            "pytest-django>=4.5",
        ],
    },
    classifiers=[
        devstatus,
        "Environment :: Web Environment",
        "Framework :: Django",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
        "Topic :: Software Development",
        "Topic :: Software Development :: Libraries :: Application Frameworks",
    ],
    zip_safe=False,
)
