import sys

from connect3.cli import main

sys.exit(main())
