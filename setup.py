from setuptools import setup, find_packages

setup(
    name="ebi_arithmetic",
    version="0.1.10",
    description="Exact and approximate fraction arithmetic with overflow-safe matrices",
    long_description=("Dual-mode rational arithmetic: fractions that are either exact or approximate, dense matrices "
                      "that store exact cells in 64-bit integers and switch to arbitrary precision on overflow, "
                      "Gauss-Jordan elimination and inversion, and exact weighted random choice"),
    long_description_content_type="text/plain",
    license="Apache License 2.0",
    python_requires=">=3.9",
    packages=find_packages(include=["ebi_arithmetic", "ebi_arithmetic.*"]),
    install_requires=["numpy", "sympy", "psutil"],
    extras_require={"test": ["pytest", "pytest-timeout"]},
    classifiers=[
        "Intended Audience :: Science/Research", "Development Status :: 3 - Alpha", "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10", "Programming Language :: Python :: 3.11", "Programming Language :: Python :: 3.12",
        "Natural Language :: English", "Operating System :: OS Independent", "Topic :: Scientific/Engineering :: Mathematics"
    ],
    keywords=["fractions", "rational arithmetic", "exact arithmetic", "matrix inversion", "random choice"],
    zip_safe=False,
)
