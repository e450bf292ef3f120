#!/usr/bin/env python

import setuptools


setuptools.setup(
        name='intcode',
        version='0.1',
        license='MIT',
        description='An Intcode virtual machine with threaded pipelines',
        packages=['intcode'],
        scripts=['bin/intcode'],
        python_requires='>=3.6',
        extras_require={
            'test': ['pytest'],
        },
        platforms=['Unix'],
        classifiers=[
            'Development Status :: 4 - Beta',
            'Environment :: Console',
            'Intended Audience :: Developers',
            'License :: OSI Approved :: MIT License',
            'Operating System :: Unix',
            'Programming Language :: Python',
            'Programming Language :: Python :: 3',
            'Topic :: Software Development :: Interpreters',
            ]
        )
