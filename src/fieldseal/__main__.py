from fieldseal.cli.app import main

raise SystemExit(main())
