import sys

from ht_ledger.cli import main

sys.exit(main())
