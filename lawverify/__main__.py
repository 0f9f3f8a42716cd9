import sys

from lawverify.cli import main

sys.exit(main())
