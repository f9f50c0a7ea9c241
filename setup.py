from setuptools import find_packages
from setuptools import setup


with open("README.md") as fd:
    long_description = fd.read()

setup(
    name="email_ext",
    provides=["email_ext"],
    version="1.0.0",
    python_requires=">=3.8",
    install_requires=[
        "attrs",
        "click",
        "flask",
        "gunicorn",
        "python-dotenv",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-datadir",
            "pytest-mock",
        ]
    },
    entry_points={"console_scripts": ["email_ext=email_ext.cli:email_ext"]},
    packages=find_packages("src"),
    package_dir={
        "": "src",
    },
    author="ESSS",
    author_email="dev@esss.com.br",
    license="MIT",
    description="Global configuration of extended e-mail notifications for CI builds, with permission-gated web and command line surfaces.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords="jenkins continuous integration ci email notification configuration",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development",
    ],
)
