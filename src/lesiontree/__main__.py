import sys

from lesiontree.cli import main

sys.exit(main())
