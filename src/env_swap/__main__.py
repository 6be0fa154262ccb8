from env_swap.cli import main

if __name__ == "__main__":
    main()
