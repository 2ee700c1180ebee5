from pumpbot.cli import main

raise SystemExit(main())
