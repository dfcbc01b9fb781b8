"""certbot-dns-netcup tests"""
