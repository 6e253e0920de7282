from setuptools import setup, find_packages

setup(
    name="fogscale",
    version="0.1.0",
    packages=find_packages(include=["fogscale", "fogscale.*"]),
    python_requires=">=3.10",
    install_requires=[
        "aiokafka==0.12.0",
        "async-timeout==5.0.1",
        "python-dotenv==1.0.1",
        "PyYAML==6.0.2",
        "requests==2.32.3",
    ],
    extras_require={
        "test": [
            "pytest==8.3.4",
        ],
    },
)
