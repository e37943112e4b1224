from setuptools import setup, find_packages

setup(
    name="SimPower",
    version="0.1.0",
    packages=find_packages(include=["simpower", "simpower.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pandas",
        "matplotlib",
        "scipy>=1.11",
    ],
    extras_require={
        "parallel": ["joblib"],
        "progress": ["tqdm"],
        "test": ["pytest", "joblib"],
    },
    author="SimPower contributors",
    description="Monte Carlo Power Analysis for two-group experiments",
)
