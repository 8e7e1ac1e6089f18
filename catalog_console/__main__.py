from catalog_console.cli import main

raise SystemExit(main())
