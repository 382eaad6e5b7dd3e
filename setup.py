from setuptools import setup, find_packages

setup(
    name='pySpectraTrait',
    version='0.1.0',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.8',
    install_requires=['numpy', 'pandas', 'scipy', 'matplotlib', 'scikit-learn', 'requests', 'joblib>=1.3'],
    extras_require={'test': ['pytest']},
    entry_points={'console_scripts': ['pyspectratrait=pySpectraTrait.pipeline:main']},
)
