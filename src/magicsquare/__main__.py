from magicsquare.cli import main

raise SystemExit(main())
