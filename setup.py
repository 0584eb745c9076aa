from setuptools import setup, find_packages

setup(
    name='atomicctl',
    version='0.1.0',
    packages=find_packages(),
    include_package_data=True,
    package_data={
        'atomicctl.modules.provision': ['templates/*.j2'],
    },
    install_requires=[
        'typer[all]',
        'paramiko',
        'jinja2',
        'pyyaml',
        'pydantic>=2',
        'jsonschema',
        'python-dotenv',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'atomicctl=atomicctl.cli:app'
        ]
    },
    author='Your Name',
    description='A CLI for provisioning Atomic Hosts to run the Docker engine over SSH',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
)
