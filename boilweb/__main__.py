from boilweb.cli import main

raise SystemExit(main())
