from setuptools import setup, find_packages

setup(
    name='togglInvoice',
    version='0.1.0',
    description='A CLI tool for turning Toggl time entries into weekly billable-time CSV invoices.',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'requests',
        'tabulate',
        'python-dotenv',
    ],
    extras_require={
        'test': ['pytest', 'tzdata'],
    },
    entry_points={
        'console_scripts': [
            'togglinvoice=togglinvoice.__main__:main',
        ],
    },
    include_package_data=True,
    package_data={
        '': ['togglinvoice.env.example'],
    },
    python_requires='>=3.9',
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
)
