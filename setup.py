from setuptools import setup, find_packages

setup(
    name='webpilot',
    version='0.1.0',
    license="Apache 2.0",
    description="WebPilot: drive a remote browser through named, typed commands",
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        'playwright>=1.40',
        'pydantic>=2.5',
        'click>=8.0',
        'fastapi>=0.100',
        'uvicorn>=0.23',
        'python-dotenv>=1.0',
        'PyYAML>=6.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
            'pytest-asyncio>=0.21',
            'httpx>=0.24',
        ],
    },
    entry_points={
        'console_scripts': [
            'webpilot-server=webpilot.command.webpilot_server:run',
            'webpilot-run=webpilot.command.webpilot_run:run',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.9',
)
