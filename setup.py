# type: ignore
from setuptools import find_packages, setup, Command

# Get VERSION constant from featuretoggles.version - we can't simply import that module because
# featuretoggles/__init__.py imports modules that require dependencies we may not have
# loaded yet. Based on https://packaging.python.org/guides/single-sourcing-package-version/
version_module_globals = {}
with open('./featuretoggles/version.py') as f:
    exec(f.read(), version_module_globals)
featuretoggles_version = version_module_globals['VERSION']


def parse_requirements(filename):
    """ load requirements from a pip requirements file """
    lineiter = (line.strip() for line in open(filename))
    return [line for line in lineiter if line and not line.startswith("#")]


reqs = parse_requirements('requirements.txt')
testreqs = parse_requirements('test-requirements.txt')


class PyTest(Command):
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        import sys
        import subprocess
        errno = subprocess.call([sys.executable, '-m', 'pytest', 'featuretoggles/testing'])
        raise SystemExit(errno)


setup(
    name='featuretoggles-server-sdk',
    version=featuretoggles_version,
    packages=find_packages(include=['featuretoggles', 'featuretoggles.*']),
    description='Feature toggle evaluation SDK for Python',
    long_description='Evaluates boolean feature toggles against a locally cached, periodically refreshed snapshot.',
    install_requires=reqs,
    python_requires='>=3.8',
    classifiers=[
        'Intended Audience :: Developers',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development',
        'Topic :: Software Development :: Libraries',
    ],
    extras_require={
        "test": testreqs,
    },
    cmdclass={'test': PyTest},
)
