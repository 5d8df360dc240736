from setuptools import setup, find_packages

setup(
    name='gitarbor',
    version='0.1',
    description='Paginated, graph-annotated git history as HTML',
    author='Iliyas Jorio',
    classifiers=[
        'Topic :: Software Development :: Version Control :: Git',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
    ],
    packages=find_packages(include=['gitarbor', 'gitarbor.*']),
    entry_points={
        'console_scripts': ['gitarbor=gitarbor.__main__:main']
    },
    python_requires='>= 3.11',
    install_requires=[
        'pygit2 >= 1.15',
    ],
    extras_require={
        'memory-indicator': ['psutil'],
        'test': ['pytest'],
    },
    tests_require=[
        'pytest',
    ],
)
