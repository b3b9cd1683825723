from leafpdf.server import main

main()
