from notecraft.cli import main

raise SystemExit(main())
