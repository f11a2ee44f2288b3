from claude_sound.cli import main

raise SystemExit(main())
