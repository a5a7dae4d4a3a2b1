import sys

from .commands import main

if __name__ == '__main__':
    result = main()
    if result:
        sys.exit(result)
