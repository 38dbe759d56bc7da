# major, minor, patch, build, release
VERSION = (1, 0, 0, 0, 'final')
