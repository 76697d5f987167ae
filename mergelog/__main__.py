import mergelog.cli

mergelog.cli.run()
