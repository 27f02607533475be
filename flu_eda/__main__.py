from flu_eda.pipeline import main

main()
