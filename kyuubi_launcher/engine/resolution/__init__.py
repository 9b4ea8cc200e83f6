"""Launch resolution for external engines.

- **chain**: Ordered fallback chain shared by every resolver
- **home**: Engine / runtime home directory lookup (env override -> install tree)
- **resource**: Main jar lookup (user override -> KYUUBI_HOME -> dev checkout)
- **workdir**: Per-user working directory provisioning
- **assembler**: Executable, argv and child environment -> LaunchSpec
"""
