import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="chipview",
    version="0.1.0",
    author="Fredrik Feyling",
    author_email="fredrik.feyling@hotmail.com",
    description="Background-loading viewer for GDSII/OASIS integrated-circuit layouts",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={'': '.'},
    packages=setuptools.find_packages(include=['chipview', 'chipview.*']),
    python_requires='>=3.10',
    install_requires = [
        'inform',
        'matplotlib',
        'numpy',
        'pint',
        'click',
        'pyyaml',
        'gdstk',
        'shapely>=2.0',
    ],
    extras_require={
        'gui': ['PyQt5'],
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'chipview = chipview.chipview:cli',
        ],
    },
)
