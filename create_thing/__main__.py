from create_thing.cli import main

main()
