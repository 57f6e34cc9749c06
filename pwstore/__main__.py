import sys

from pwstore.shell.repl import main

if __name__ == "__main__":
    sys.exit(main())
