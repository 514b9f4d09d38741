import sys

from ladyjava.cli import main

sys.exit(main())
