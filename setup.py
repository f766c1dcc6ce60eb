from setuptools import setup

setup(
    name="PyProblems",
    version="0.1.0",
    packages=[
        "pyproblems",
        "pyproblems.action",
        "pyproblems.model",
    ],
    include_package_data=True,
    license="GPLv3",
    python_requires=">=3.8",
    install_requires=[
        "mysql-connector-python>=8.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    description="Record access for competitive programming contests, problems and submissions",
)
