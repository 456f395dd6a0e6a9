from setuptools import setup

package_name = 'amcl_sensors'

setup(
    name=package_name,
    version='0.1.0',
    packages=[package_name],
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
    ],
    install_requires=['setuptools', 'numpy<2', 'scipy'],
    extras_require={'test': ['pytest']},
    zip_safe=True,
    maintainer='armaanm',
    maintainer_email='armaanmahajanbg@gmail.com',
    description='AMCL range-sensor observation models: beam, likelihood field, beam skipping, Gompertz',
    license='Apache-2.0',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'amcl_score = amcl_sensors.score_scan:main',
        ],
    },
)
