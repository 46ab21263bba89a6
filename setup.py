from setuptools import setup

setup(
    name='irctrack',
    version='0.1.0',
    packages=[
        'irctrack',
        'irctrack.utils'
    ],
    install_requires=[],
    extras_require={
        'docs': 'sphinx_rtd_theme',    # the Sphinx theme we use
        'tests': 'pytest',             # collect and run tests
        'coverage': 'pytest-cov'       # get test case coverage
    },
    entry_points={
        'console_scripts': [
            'irctrack-replay = irctrack.utils.replay:main'
        ]
    },

    keywords='irc parsing isupport channel state tracking python3',
    description='IRC line parsing and channel/user state tracking for Python 3.',
    license='BSD',
    python_requires='>=3.7',

    zip_safe=True,
    test_suite='tests'
)
