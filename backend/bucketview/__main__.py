from bucketview.cli import main

main()
