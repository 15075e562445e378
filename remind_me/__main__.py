import sys

from remind_me.cli import main

sys.exit(main())
