"""Internal implementation of `~certbot_dns_netcup.dns_netcup` plugin."""
